"""x402 paywall service: 402 challenge, facilitator settlement, entitlement gate."""

__version__ = "1.0.0"
