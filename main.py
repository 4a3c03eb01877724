#!/usr/bin/env python3
"""gradletiming - Gradle build timing statistics."""

from gradletiming.cli import main

if __name__ == "__main__":
    main()
