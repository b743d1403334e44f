# auth.py
"""
Identity adapter: turns the bearer token issued by the auth service into a
Principal. Tokens are trusted once the signature checks out.
"""
from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt

import config
from services.access_policy import Principal


# Token Auth Dependency
def verify_token(request: Request) -> dict:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
     token = auth.split(" ", 1)[1]
     try:
          return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
     except JWTError:
          raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def get_principal(token: dict = Depends(verify_token)) -> Principal:
     user_id = token.get("user_id", token.get("id"))
     if user_id is None:
          raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token has no user id")
     try:
          user_id = int(user_id)
     except (TypeError, ValueError):
          raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token has an invalid user id")
     return Principal(user_id=user_id, is_admin=bool(token.get("is_admin", False)))
