"""
Couche application : session, clients et orchestration.

- SessionManager : cycle de vie du credential et de la Session
- ClientFactory, SessionClients : clients autorisés vers les canisters
- ContributionWorkflow, ContributionGate : parcours de contribution
- classify : classification des échecs distants
- campaign_views : dérivations pures pour l'affichage
- ProjectCreationService : création idée + campagne
"""
