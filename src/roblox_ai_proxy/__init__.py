"""
Roblox AI Proxy package.

Provides:
- A stateless relay from the Roblox Studio plugin to OpenAI, Gemini and Claude
- FastAPI app + uvicorn launcher
"""
