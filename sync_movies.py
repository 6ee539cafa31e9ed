"""
Pull the movie library from a Plex server and bake it into the static site bundle.

    python sync_movies.py --list-libraries
    python sync_movies.py --library Films
"""

from plex_movie_sync.main import main

if __name__ == "__main__":
    main()
