"""
The `crypt` package provides cryptographic utilities that secure
registration and login.

Contents
--------
- encrypt_decrypt
    Utility module exposing the `EncryptionDec` class:
        * `hash_password`: securely hashes plaintext passwords using bcrypt
        * `check_passwords`: verifies a plaintext password against a hashed one
        * `is_valid_password`: validates password complexity rules
        * `is_valid_jmbg`: checks the 13-digit national ID format
        * `hash_identity`: stable SHA-256 digest of the national ID, used as a
          uniqueness key so the raw number is never stored
"""
