"""Configuration property bindings for the OData client."""
