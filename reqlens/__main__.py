"""
ReqLens - Request Metadata Collector

Entry point for running as a module:
    python -m reqlens --user-agent "..." --remote-addr 8.8.8.8
"""

from .cli import main

if __name__ == '__main__':
    main()
