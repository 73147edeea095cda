"""
Tests for PasswordManager service.
"""

from eventplanning.services.password_manager import PasswordManager


class TestPasswordManager:
    """Test cases for the PasswordManager service."""

    def test_password_manager_initialization(self):
        """Test PasswordManager initialization."""
        password_manager = PasswordManager()
        assert password_manager.pwd_context is not None

    def test_hash_password(self):
        """Test password hashing."""
        password_manager = PasswordManager()
        password = "TestPassword123!"

        hashed = password_manager.hash_password(password)

        assert hashed != password
        assert hashed.startswith("$2b$")  # bcrypt hash format

    def test_hash_password_different_hashes(self):
        """Test that the same password produces different hashes."""
        password_manager = PasswordManager()

        hash1 = password_manager.hash_password("TestPassword123!")
        hash2 = password_manager.hash_password("TestPassword123!")

        # salted
        assert hash1 != hash2

    def test_verify_password(self):
        password_manager = PasswordManager()
        hashed = password_manager.hash_password("TestPassword123!")

        assert password_manager.verify_password("TestPassword123!", hashed) is True
        assert password_manager.verify_password("WrongPassword123!", hashed) is False

    def test_verify_password_empty_inputs(self):
        """Test that empty passwords or hashes never verify."""
        password_manager = PasswordManager()
        hashed = password_manager.hash_password("TestPassword123!")

        assert password_manager.verify_password("", hashed) is False
        assert password_manager.verify_password(None, hashed) is False
        assert password_manager.verify_password("TestPassword123!", "") is False

    def test_verify_password_special_characters(self):
        password_manager = PasswordManager()
        password = "Test@Password#123$%^&*()"
        hashed = password_manager.hash_password(password)

        assert password_manager.verify_password(password, hashed) is True
