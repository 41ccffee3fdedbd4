# Core package - foundational components
#
# Modules:
# - config: Application settings
# - logging: Structured logging
# - locks: Asyncio reader/writer lock
# - storage: Pluggable todo repositories (memory, PostgreSQL)
