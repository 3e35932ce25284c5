"""Vault Connector Meta information.
   Vault Connector keeps tenant-scoped signing keys and secrets
   behind a pluggable entity storage.
"""
__title__ = 'vault_connector'
__description__ = (
   'Vault Connector keeps tenant-scoped signing keys and secrets '
   'behind a pluggable entity storage.'
)
__version__ = '0.3.0'
__copyright__ = 'Copyright (c) 2024 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/phenobarbital/vault-connector'
