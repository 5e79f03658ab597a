import argparse
import logging
import sys
import traceback

from config import load_config

CFG = load_config()


def excepthook(exctype, value, tb):
    msg = "".join(traceback.format_exception(exctype, value, tb))
    try:
        with open(CFG.crash_log, "a", encoding="utf-8") as f:
            f.write(msg + "\n")
    except OSError:
        logging.getLogger("run").error("could not write crash log %s", CFG.crash_log)
    print("UNHANDLED EXCEPTION\n" + msg)
    sys.exit(1)

sys.excepthook = excepthook


def main(argv=None):
    parser = argparse.ArgumentParser(description="Ballistic launch solver service")
    parser.add_argument("--host", default=CFG.host)
    parser.add_argument("--port", default=CFG.port, type=int)
    parser.add_argument("--log-level", default=CFG.log_level)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    import uvicorn
    from launch_server.app import create_app

    uvicorn.run(create_app(CFG), host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
