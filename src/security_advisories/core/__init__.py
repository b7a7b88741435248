"""Advisory database core: domain model, ports, services and use cases."""
