#!/usr/bin/env python3
"""
Application startup script with environment configuration support.
"""

import os
import sys
import argparse


def main():
    """Main startup function with environment configuration"""
    parser = argparse.ArgumentParser(description="Clearr Backend Server")
    parser.add_argument(
        "--env",
        choices=["development", "staging", "production", "testing"],
        default=None,
        help="Environment to run (default: from ENVIRONMENT env var or development)"
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Host to bind to (overrides config)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind to (overrides config)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker processes (overrides config)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload (overrides config)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode (overrides config)"
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing database tables and exit"
    )

    args = parser.parse_args()

    # Environment must be set before settings are read
    if args.env:
        os.environ["ENVIRONMENT"] = args.env

    from clearr.config import reload_settings

    try:
        settings = reload_settings()
        print(f"✓ Loaded configuration for environment: {settings.environment.value}")
    except Exception as e:
        print(f"✗ Failed to load configuration: {e}")
        sys.exit(1)

    if args.create_tables:
        from clearr.core.db import create_all
        create_all()
        print("✓ Database tables created")
        return

    # Apply command line overrides
    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    if args.workers:
        settings.workers = args.workers
    if args.reload:
        settings.reload = True
    if args.debug:
        settings.debug = True

    # Print startup information
    print(f"🚀 Starting {settings.app_name} v{settings.app_version}")
    print(f"   Environment: {settings.environment.value}")
    print(f"   Host: {settings.host}")
    print(f"   Port: {settings.port}")
    print(f"   Workers: {settings.workers}")
    print(f"   Debug: {settings.debug}")
    print(f"   Reload: {settings.reload}")
    print(f"   Log Level: {settings.log_level.value}")

    # Start the server
    import uvicorn

    uvicorn.run(
        "clearr.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        workers=settings.workers if not settings.reload else 1,
        log_level=settings.log_level.value.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    main()
