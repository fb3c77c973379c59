import hashlib
import bcrypt

def hash_password(password:str) -> str:
    sha_digest = hashlib.sha256(password.encode("utf-8")).digest()
    hashed = bcrypt.hashpw(sha_digest, bcrypt.gensalt())
    return hashed.decode()

def verify_password(password:str, hashed_password:str) -> bool:
    if not hashed_password:
        return False

    sha_digest = hashlib.sha256(password.encode("utf-8")).digest()
    try:
        if bcrypt.checkpw(sha_digest, hashed_password.encode()):
            return True
        # rows written by the old signup form hold bcrypt(password) without the sha256 step
        return bcrypt.checkpw(password.encode("utf-8")[:72], hashed_password.encode())
    except ValueError:
        # not a bcrypt hash at all
        return False
