"""
phonesignup - Phone-keyed self-service account registration.

The domain package holds the registration workflow; adapters provide
storage, directory, crypto and SMS implementations of its ports.
"""

__version__ = "0.1.0"
