import argparse

import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Run the DualPane file browser service")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    uvicorn.run("dualpane.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
