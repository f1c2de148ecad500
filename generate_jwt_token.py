#!/usr/bin/env python3
"""Generate a JWT token for calling the HTTP API from scripts."""

import sys

from dotenv import load_dotenv

from docspace.services.auth import AuthError, AuthService
from docspace.services.config import get_config


def generate_token(user_id="local-dev"):
    """Generate a JWT token for the specified user."""
    try:
        config = get_config()
        auth_service = AuthService(config=config)
        token = auth_service.create_jwt(user_id)
    except (AuthError, ValueError) as e:
        print(f"Error generating token: {e}")
        print("Make sure JWT_SECRET_KEY is set in your environment")
        return None

    print(f"Generated JWT token for user '{user_id}':")
    print(f"Authorization: Bearer {token}")
    return token


if __name__ == "__main__":
    load_dotenv()
    user_id = sys.argv[1] if len(sys.argv) > 1 else "local-dev"
    sys.exit(0 if generate_token(user_id) else 1)
