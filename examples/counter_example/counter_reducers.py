from pydantic import BaseModel
from pydux import combine_reducers, create_reducer, on

from counter_actions import increment, decrement, increment_by, reset, rename


# ====== Model Definition ======
class ProfileState(BaseModel):
    name: str = "anonymous"
    renamed: int = 0


# ====== Reducers ======
counter_reducer = create_reducer(
    0,
    on(increment, lambda state, action: state + 1),
    on(decrement, lambda state, action: state - 1),
    on(increment_by, lambda state, action: state + action.payload),
    on(reset, lambda state, action: action.payload),
)

profile_reducer = create_reducer(
    ProfileState(),
    on(rename, lambda state, action: state.model_copy(
        update={"name": action.payload, "renamed": state.renamed + 1}
    )),
)

root_reducer = combine_reducers({
    "counter": counter_reducer,
    "profile": profile_reducer,
})
