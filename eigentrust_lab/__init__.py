"""
EigenTrust Lab: trust-propagation engine for exploring reputation in weighted trust networks.

Computes EigenTrust scores by damped power iteration and measures how graph
transforms (merging nodes, aggregating communities) shift converged scores.
The engine lives in eigentrust_lab.engine; api_server exposes it over HTTP.
"""

__version__ = "0.1.0"
