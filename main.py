"""Entry point for the Recipe Extractor Service."""

if __name__ == "__main__":
    import uvicorn
    from recipe_extractor.core.config import settings

    print(f"🚀 Starting {settings.api_title} v{settings.api_version}")
    print(f"📊 Cache enabled: {settings.cache_enabled} (max {settings.cache_max_entries}, ttl {settings.cache_ttl_hours}h)")
    print(f"🔑 Gemini API keys configured: {len(settings.gemini_api_keys)}")
    print(f"📝 Log level: {settings.log_level}")

    uvicorn.run(
        "recipe_extractor.main:app",  # Use string import for hot reload
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug_mode,
        log_level=settings.log_level.lower()
    )
