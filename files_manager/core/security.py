from werkzeug.security import check_password_hash, generate_password_hash


def hash_password(password: str) -> str:
    # salted scrypt/pbkdf2 string, algorithm and salt embedded
    return generate_password_hash(password)


def verify_password(stored_hash: str, password: str) -> bool:
    if not stored_hash:
        return False
    return check_password_hash(stored_hash, password)
