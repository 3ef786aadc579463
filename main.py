from kanban_dnd.pipeline.replay import main

if __name__ == "__main__":
    # Replay a JSON-lines event script, e.g. examples/sample_events.jsonl
    main()
