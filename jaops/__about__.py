__version__ = "0.1.0"
__description__ = "jaops : JSON:API operation pipeline for asyncio"
