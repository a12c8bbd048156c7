# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User registration (auth.users table)
# - User login and session management
# - JWT token generation and validation
# - Password hashing and security

"""
Supabase Auth provides:
- auth.sign_up() - Register new users (full_name stored in user_metadata)
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users

A trigger on auth.users creates the matching row in public.profiles
(see modules/users/models.py). It runs asynchronously from the point of view
of the API, so registration polls for the profile before signing in.
"""
