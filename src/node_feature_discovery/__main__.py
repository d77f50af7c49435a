"""
Node Feature Discovery - Entry point for python -m node_feature_discovery
"""

if __name__ == "__main__":
    import logging
    import signal

    # Default SIGPIPE behavior so piping the dry-run table into `head`
    # does not raise on the closed pipe
    if hasattr(signal, "SIGPIPE"):
        signal.signal(signal.SIGPIPE, signal.SIG_DFL)

    logging.raiseExceptions = False

    from node_feature_discovery.cli import main
    main(prog_name="nfd")
