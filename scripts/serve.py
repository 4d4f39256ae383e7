from __future__ import annotations

import argparse
from pathlib import Path
import socket
import sys

import uvicorn

REPO_ROOT = Path(__file__).resolve().parents[1]
BACKEND_DIR = REPO_ROOT / 'backend'
sys.path.insert(0, str(BACKEND_DIR))


def can_connect(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.settimeout(0.4)
        return sock.connect_ex((host, port)) == 0


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Start the analytics API.')
    parser.add_argument('--host', default='127.0.0.1')
    parser.add_argument('--port', type=int, default=8000)
    parser.add_argument('--reload', action='store_true', help='Restart on source changes.')
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    if can_connect(args.host, args.port):
        print(f'Port {args.port} is already in use. Stop the existing server first.')
        return 2

    print(f'Backend: http://{args.host}:{args.port}')
    uvicorn.run(
        'moodmeter.main:app',
        host=args.host,
        port=args.port,
        reload=args.reload,
        app_dir=str(BACKEND_DIR),
    )
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
