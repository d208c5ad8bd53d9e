"""
Couche domaine (core).

Contient les entités métier, ports (interfaces abstraites), objets valeur
et la hiérarchie d'exceptions. Cette couche n'a AUCUNE dépendance vers
l'infrastructure (httpx, diskcache, FastAPI).

Sous-packages :
- entities/ : Entités métier (Campaign, Contribution, EscrowSummary)
- ports/ : Interfaces abstraites des canisters et du fournisseur d'identité
- value_objects/ : Objets valeur immutables (montants e8s, session, endpoints)
"""
