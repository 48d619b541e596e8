import uvicorn

from Security.security_config import get_int

if __name__ == "__main__":
    uvicorn.run("portal.main:create_app", factory=True, host="127.0.0.1", port=get_int("PORT", 8000))
