"""
FundVerse - Client de financement participatif sur l'Internet Computer.

Ce package authentifie l'utilisateur aupres d'un fournisseur d'identite,
obtient des clients autorises vers les canisters backend et Fund_Flow,
et execute le parcours de contribution en plusieurs etapes.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, objets valeur, erreurs)
- services/ : Couche application (session, fabrique de clients, orchestration)
- adapters/ : Couche infrastructure (CLI, clients canister, fournisseur d'identité)
"""

__version__ = "0.1.0"
