"""LLM access package.

Architectural role:
    Provides provider configuration, request-payload construction, and transport
    adapters used by routing and capabilities to invoke text-generation backends.

Module split:
    - `provider_config`: environment-driven provider and model configuration.
    - `service`: client protocol and canonical instruction-to-payload adapter.
    - `client`: provider-specific HTTP transport and response parsing.
"""
