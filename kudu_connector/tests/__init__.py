"""
Tests Module: Unit Tests

Test Coverage:
    - Configuration binding and validation
    - Client builder, factory and handle
    - Schema emulation strategies
    - Session creation and the build-once provider
    - Range partition procedures
    - Connector bootstrap
    - Structured logging
"""
