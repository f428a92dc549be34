# orderhub/user_service/main.py
"""
Dev mock of the user directory:  uvicorn orderhub.user_service.main:app --port 8002
"""
from fastapi import FastAPI, HTTPException

app = FastAPI(title="User Service (dev mock)")


USERS = {
    "buyer@example.com": {"id": "buyer-1", "email": "buyer@example.com", "role": "CLIENT"},
    "seller1@example.com": {"id": "seller-1", "email": "seller1@example.com", "role": "SELLER"},
    "seller2@example.com": {"id": "seller-2", "email": "seller2@example.com", "role": "SELLER"},
}


@app.get("/users/email/{email}")
def get_user_by_email(email: str):
    user = USERS.get(email)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
