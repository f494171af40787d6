"""
Switchboard Test Suite
======================

Test Organization
-----------------
- tests/unit/          : Fast unit tests with mocks (no network, no database)
- tests/integration/   : Storage tests against a real SQLite database (aiosqlite)

Testing Philosophy
------------------
- Unit tests: fast, isolated, drive the lifecycle through a fake gateway
- Integration tests: real engine and connections, one database file per test
- Use pytest markers to categorize and selectively run tests
- Follow AAA pattern: Arrange, Act, Assert
"""
