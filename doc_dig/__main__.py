from doc_dig.main import app

app(prog_name="doc-dig")
