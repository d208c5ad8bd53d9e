"""
Clients des canisters distants.

Ce module fournit les adaptateurs de transport vers le replica :
- HttpAgent : agent HTTP lié à une session, appels query/update
- BackendClient : canister backend (idées, campagnes)
- FundFlowClient : canister Fund_Flow (utilisateurs, contributions, séquestre)

Infrastructure partagée:
- ReplicaBusyError, with_retry, request_with_retry : relance des appels query
"""

from fundverse.adapters.api.agent import HttpAgent
from fundverse.adapters.api.backend_client import BackendClient
from fundverse.adapters.api.fund_flow_client import FundFlowClient
from fundverse.adapters.api.retry import ReplicaBusyError, request_with_retry, with_retry

__all__ = [
    "BackendClient",
    "FundFlowClient",
    "HttpAgent",
    "ReplicaBusyError",
    "request_with_retry",
    "with_retry",
]
