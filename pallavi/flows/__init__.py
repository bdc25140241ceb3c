"""
Career guidance flows.

A flow pairs a prompt template with input and output schemas and one model
call. `definitions` declares the nine flows, `flow.FlowPipeline` runs them,
`actions` turns failures into tagged results and `orchestration` composes
several flows.
"""
