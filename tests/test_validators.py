import unittest

from storefront.modules.auth.validators import (
    password_requirements, validate_email, validate_name, validate_password
)


class ValidatorsTestCase(unittest.TestCase):
    def test_email(self):
        self.assertEqual(validate_email(""), "Email is required")
        self.assertEqual(validate_email("   "), "Email is required")
        self.assertEqual(validate_email("no-at-sign"), "Please enter a valid email address")
        self.assertEqual(validate_email("a@b"), "Please enter a valid email address")
        self.assertEqual(validate_email("a@x.com\n"), "Please enter a valid email address")
        self.assertIsNone(validate_email("a@x.com"))

    def test_password_reports_first_broken_rule(self):
        cases = {
            "": "Password is required",
            "Ab1!": "Password must be at least 8 characters long",
            "abcdefg1!": "Password must contain at least one uppercase letter",
            "ABCDEFG1!": "Password must contain at least one lowercase letter",
            "Abcdefgh!": "Password must contain at least one number",
            "Abcdefgh1": "Password must contain at least one special character (!@#$%^&*)",
        }
        for password, message in cases.items():
            with self.subTest(password=password):
                self.assertEqual(validate_password(password), message)
        self.assertIsNone(validate_password("Passw0rd!"))

    def test_name(self):
        self.assertEqual(validate_name("", "First name"), "First name is required")
        self.assertEqual(validate_name("A", "First name"), "First name must be at least 2 characters long")
        self.assertEqual(validate_name("Ann3", "Last name"), "Last name can only contain letters")
        self.assertIsNone(validate_name("Mary Ann", "First name"))

    def test_password_requirements_checklist(self):
        checklist = password_requirements("abcdefgh")
        self.assertTrue(checklist.min_length)
        self.assertTrue(checklist.has_lowercase)
        self.assertFalse(checklist.has_uppercase)
        self.assertFalse(checklist.has_number)
        self.assertFalse(checklist.has_special)
        self.assertFalse(checklist.satisfied)
        self.assertTrue(password_requirements("Passw0rd!").satisfied)
