from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

"""Application entry point.

The app is intended to be served by Gunicorn; running this file directly execs it.
"""

from fastcommand import create_app

app = create_app()
if __name__ == '__main__':
    import os
    import sys

    command = [
        "gunicorn",
        "-w", os.environ.get("WEB_CONCURRENCY", "1"),
        "-b", os.environ.get("BIND", "0.0.0.0:5055"),
        "run:app"
    ]

    print(f"🚀 Launching Gunicorn with command: {' '.join(command)}")
    try:
        os.execvp(command[0], command)
    except FileNotFoundError:
        print("Error: 'gunicorn' command not found.", file=sys.stderr)
        print("Please install Gunicorn: pip install gunicorn", file=sys.stderr)
        sys.exit(1)
