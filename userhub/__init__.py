"""userhub: user accounts, bearer tokens and the rules for who may manage whom."""
