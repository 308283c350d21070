import asyncio

from dotenv import load_dotenv
from loguru import logger

from icon_search_mcp.app_config import apply_runtime_env, load_json_config, parse_app_config, resolve_runtime_env
from icon_search_mcp.bootstrap import bootstrap_runtime


async def main() -> None:
    load_dotenv()

    app = apply_runtime_env(parse_app_config(load_json_config()), resolve_runtime_env())
    runtime = await bootstrap_runtime(app)

    libraries = await runtime.service.get_libraries()
    logger.info(f"Icon search MCP server '{app.server_name}' starting with libraries: {', '.join(libraries) or 'none'}")
    if runtime.init_failures:
        logger.warning(f"Unavailable libraries: {', '.join(runtime.init_failures)}")
    if runtime.log_descriptions:
        logger.debug(f"Logging: {', '.join(runtime.log_descriptions)}")

    try:
        await runtime.server.run_stdio_async()
    except Exception:
        logger.exception("Icon search MCP server stopped unexpectedly")
        raise
    finally:
        await runtime.close()
        logger.info("Icon search MCP server shut down")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
