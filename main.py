#!/usr/bin/env python3
"""
GoDaddy DNS Sync - Main Entry Point

This is the main entry point for GoDaddy DNS Sync.
It can be run directly or imported as a module.
"""

from godaddy_dns_sync.cli.main import main

if __name__ == "__main__":
    main()
