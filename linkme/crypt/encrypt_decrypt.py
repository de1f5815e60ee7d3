import hashlib
import re

import bcrypt

from linkme.constants import JMBG_LENGTH


class EncryptionDec:
    """
    Utility class for password hashing, password validation and identity hashing.

    Methods
    -------
    hash_password(text: str) -> str
        Hashes a plaintext password using bcrypt with a generated salt.
    check_passwords(plain_text: str, passwd: str) -> bool
        Verifies a plaintext password against a hashed password.
    is_valid_password(password: str) -> bool
        Validates that a password meets security requirements:
        - At least 8 characters
        - At least one lowercase letter
        - At least one uppercase letter
        - At least one digit
        - At least one special character
    is_valid_jmbg(jmbg: str) -> bool
        Checks that a national ID number is exactly 13 digits.
    hash_identity(jmbg: str) -> str
        Stable one-way hash of a national ID number used as a uniqueness key.
    """

    def hash_password(self, text: str) -> str:
        """
        Hash a plaintext password using bcrypt.

        Parameters
        ----------
        text : str
            The plaintext password.

        Returns
        -------
        str
            The bcrypt-hashed password (UTF-8 decoded).
        """
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(text.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def check_passwords(self, plain_text: str, passwd: str) -> bool:
        """
        Verify if a plaintext password matches a hashed password.

        Parameters
        ----------
        plain_text : str
            The plaintext password to check.
        passwd : str
            The previously hashed password to verify against.

        Returns
        -------
        bool
            True if the password matches, False otherwise.
        """
        return bcrypt.checkpw(plain_text.encode("utf-8"), passwd.encode("utf-8"))

    def is_valid_password(self, password: str) -> bool:
        """
        Validate that a password meets security complexity rules.

        Parameters
        ----------
        password : str
            The plaintext password to validate.

        Returns
        -------
        bool
            True if password is valid, False otherwise.
        """
        if len(password) < 8:
            return False

        has_lower = re.search(r"[a-z]", password)
        has_upper = re.search(r"[A-Z]", password)
        has_digit = re.search(r"\d", password)
        has_special = re.search(r"[!@#$%^&*(),.?\":{}|<>]", password)

        return all([has_lower, has_upper, has_digit, has_special])

    def is_valid_jmbg(self, jmbg: str) -> bool:
        """Return True when ``jmbg`` is exactly 13 decimal digits."""
        return len(jmbg) == JMBG_LENGTH and jmbg.isdigit()

    def hash_identity(self, jmbg: str) -> str:
        """
        Hash a national ID number for uniqueness checks.

        Unlike passwords this hash is unsalted: equal inputs must map to equal
        outputs so the database can enforce one account per person.

        Parameters
        ----------
        jmbg : str
            The raw national ID number.

        Returns
        -------
        str
            SHA-256 hex digest (64 characters).

        Example
        -------
        >>> enc = EncryptionDec()
        >>> enc.hash_identity("0101990710006") == enc.hash_identity("0101990710006")
        True
        """
        return hashlib.sha256(jmbg.strip().encode("utf-8")).hexdigest()
