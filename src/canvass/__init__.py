"""
canvass — door-to-door survey recorder.

Records one respondent per save: a postal address, four tally counters
(SI, NO, CT, Interés) and free-text notes. Records are kept in insertion
order, persisted wholesale to a key-value slot after every change, and
exported as a comma-delimited file.

LAYERS:
-------
    model          records, draft and the consolidated app state
    transitions    pure functions moving the state between Create and Edit
    serialization  JSON/YAML wire format of the record list
    storage        key-value stores and the survey repository
    export         CSV/YAML rendering and the file-plus-share step
    clock          wall-clock display and save-time stamps
    app            SurveyApp, the controller every front end drives
    cli            argparse front end (python -m canvass)
"""

__version__ = "0.1.0"
