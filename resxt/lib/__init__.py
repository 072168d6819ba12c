"""
Library modules that implement the building blocks of resxt: name encoding, bundle providers,
storage providers, and the configuration environment.
"""
