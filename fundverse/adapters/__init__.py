"""
Couche infrastructure (adapters).

Implementations concretes des ports du domaine :
- api/ : Agent HTTP et clients des canisters (backend, Fund_Flow)
- identity/ : Echange de connexion par redirection et stockage du credential
- cli/ : Interface en ligne de commande (Typer + Rich)
"""
