import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from pydux import bind_action_creators, create_selector

import counter_actions
from counter_store import performance, store

get_count = create_selector(lambda state: state["counter"])
get_summary = create_selector(
    lambda state: state["counter"],
    lambda state: state["profile"],
    result_fn=lambda count, profile: f"{profile.name}: {count}",
)

if __name__ == "__main__":
    # 訂閱狀態變化
    store.select(get_count).subscribe(
        on_next=lambda t: print(f"計數變化: {t[0]} -> {t[1]}")
    )
    unsubscribe = store.subscribe(lambda: print(f"摘要: {get_summary(store.get_state())}"))

    actions = bind_action_creators(
        {
            "increment": counter_actions.increment,
            "decrement": counter_actions.decrement,
            "increment_by": counter_actions.increment_by,
            "reset": counter_actions.reset,
            "rename": counter_actions.rename,
        },
        store.dispatch,
    )

    print("\n==== 開始測試基本操作 ====")
    actions["increment"]()
    actions["increment_by"](5)
    actions["rename"]("pydux")
    actions["decrement"]()

    unsubscribe()
    actions["reset"](10)

    print("\n==== 最終狀態 ====")
    print(store.get_state())
    print(performance.get_metrics())
