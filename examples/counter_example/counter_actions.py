from pydux import create_action

increment = create_action("[Counter] Increment")
decrement = create_action("[Counter] Decrement")
increment_by = create_action("[Counter] Increment By", lambda amount: amount)
reset = create_action("[Counter] Reset", lambda value: value)
rename = create_action("[Profile] Rename", lambda name: name)
