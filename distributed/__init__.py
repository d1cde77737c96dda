"""
HTTP services for proof aggregation: an aggregator server, a verifier
server and the clients that talk to them.
"""
