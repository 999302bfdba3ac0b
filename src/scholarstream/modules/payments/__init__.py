"""
Payments Module

HTTP surface for application fee checkout: session creation, server-side
confirmation and the provider webhook.
"""
