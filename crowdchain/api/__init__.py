# crowdchain/api/__init__.py
# HTTP blueprints: creator applications and API status.
