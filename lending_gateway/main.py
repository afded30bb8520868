#!/usr/bin/env python3
"""
Lending Gateway
Entry point for ``python -m lending_gateway.main``
"""
from .cli import main

if __name__ == "__main__":
    main()
