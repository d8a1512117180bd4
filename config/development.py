from .base import *

DEBUG = True

# Email goes to the console while developing
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"

# Fast hashing keeps the test suite quick
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]
