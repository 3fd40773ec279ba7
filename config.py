import os

from dotenv import load_dotenv

load_dotenv()

# Store
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "playcenter")

# Server
PORT = int(os.getenv("PORT", "5000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Game images, also served under /uploads
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
