"""
Create Admin User Script
Creates an admin user if it does not already exist.
Usage: python -m app.scripts.create_admin
"""

import asyncio
import os
from sqlalchemy import select

from app.database import AsyncSessionLocal
from app.models.user import User
from app.services import auth_service
from app.utils.password_policy import validate_password


async def create_admin():
    email = os.getenv("ADMIN_EMAIL", "admin@flippi.local").lower()
    username = os.getenv("ADMIN_USERNAME", "admin").lower()

    async with AsyncSessionLocal() as db:
        result = await db.execute(
            select(User).where((User.username == username) | (User.email == email))
        )
        admin = result.scalar_one_or_none()

        if admin:
            if admin.role != "admin":
                admin.role = "admin"
                await db.commit()
                print(f"Promoted existing user to admin: {admin.username}")
            else:
                print("Admin user already exists.")
            return

        # Require ADMIN_PASSWORD from env
        password = os.getenv("ADMIN_PASSWORD")
        if not password:
            print("ADMIN_PASSWORD is required to create the admin user.")
            return

        errors = validate_password(password)
        if errors:
            print("ADMIN_PASSWORD does not meet password policy:")
            for err in errors:
                print(f"- {err}")
            return

        new_admin = User(
            email=email,
            username=username,
            password_hash=auth_service.get_password_hash(password),
            role="admin",
            is_active=True,
            email_verified=True,
        )

        db.add(new_admin)
        await db.commit()
        print(f"Successfully created admin user: {username}")

if __name__ == "__main__":
    asyncio.run(create_admin())
