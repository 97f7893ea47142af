#!/usr/bin/env python3
"""Quick script to hash the admin API secret using Argon2."""
import argon2
import sys

if len(sys.argv) != 2:
    print("Usage: python hash_secret.py 'your-secret-here'")
    print()
    print("Example:")
    print("  python hash_secret.py 'MyDashboardSecret'")
    sys.exit(1)

secret = sys.argv[1]

if len(secret) < 16:
    print("Error: Admin secret must be at least 16 characters long")
    sys.exit(1)

# Generate Argon2 hash
ph = argon2.PasswordHasher()
secret_hash = ph.hash(secret)

print("Secret hash generated!")
print()
print("Add this to your .env file:")
print("-" * 80)
print(f"ADMIN_API_SECRET={secret_hash}")
print("-" * 80)
print()
print("The dashboard keeps sending the plain secret as its bearer token.")
