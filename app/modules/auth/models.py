# Session tokens and recovery codes
# Nothing in this module is persisted; credentials live on the users table
# (see app/modules/users/models.py)

"""
Session token (HS256 JWT, signed with JWT_SECRET):
- sub: user id
- firstname, lastname, avatarUrl, email: profile snapshot at issuance
- iat: issuance time
- exp: iat + TOKEN_EXPIRE_DAYS (default 60)

Credential states per email, as seen by the sign-in/sign-up/google-auth flows:
- no user row
- placeholder: row without password and without google_id
- credentialed: password and/or google_id set

Password recovery codes are RECOVERY_CODE_LENGTH (default 5) random digits,
delivered by email only.
"""
