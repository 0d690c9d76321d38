"""Entrypoint that reads PORT from environment and starts the API server."""

from yatra.server import main

if __name__ == "__main__":
    main()
