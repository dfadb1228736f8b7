"""
irodsrest - iRODS REST client credential support

Recovers the iRODS password from the legacy obfuscated ~/.irods/.irodsA
file so REST clients can authenticate without an explicit password.
"""

__version__ = "0.3.0"
__author__ = "irodsrest contributors"
