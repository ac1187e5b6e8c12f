#!/usr/bin/env python3
"""
Script helper para ejecutar la app (FastAPI + uvicorn).
Ejecuta desde la raíz del proyecto para asegurar que Python encuentre los
módulos 'api' e 'itinerary_ai_core'.

Variables opcionales: HOST (default 127.0.0.1), PORT (default 8000).
"""

import os
import sys
from pathlib import Path

# Asegurar que el directorio raíz esté en el PYTHONPATH
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

if __name__ == "__main__":
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    try:
        import uvicorn
        print(f"🚀 Iniciando Itinerary Architect en http://{host}:{port}")
        print(f"📖 Documentación de la API en http://{host}:{port}/docs")
        uvicorn.run("api.main:app", host=host, port=port, reload=True)
    except ImportError as e:
        print("❌ Error: No se pudo importar uvicorn. ¿Instalaste el proyecto?")
        print("   Ejecuta: pip install -e '.[test]'")
        print(f"   Error: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"❌ Error al iniciar el servidor: {e}")
        sys.exit(1)
