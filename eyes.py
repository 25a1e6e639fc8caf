#!/usr/bin/env python3
"""
Eyes - asynchronous TCP connect port scanner

Checks which ports on a host accept a TCP connection, keeping the number
of connection attempts in flight under a fixed cap.

Usage:
    python eyes.py 192.168.1.10
    python eyes.py example.com -p 22,80,8000-8100 -c 500 -t 2 -v
"""

from eyes.main import run

if __name__ == "__main__":
    run()
