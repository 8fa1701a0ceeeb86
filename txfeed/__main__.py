"""
Run the feed server: python -m txfeed
"""
import uvicorn

from txfeed.config import HOST, PORT


def main():
    uvicorn.run("txfeed.main:app", host=HOST, port=PORT)


if __name__ == '__main__':
    main()
