"""
printers of the parse tree

TreePrinter  - indented text, `<rule>` for nodes and `KIND(lexeme)` for tokens
Displayer    - interactive tree chart (html), rendered with pyecharts
"""

from pyecharts import options as opts
from pyecharts.charts import Tree

from . import settings
from .lexer import Token


class TreePrinter:
    def __init__(self, show_empty=True):
        self.show_empty = show_empty

    def _children(self, node):
        children = node.children()
        if self.show_empty:
            return children
        return [child for child in children if isinstance(child, Token) or child.rule != 'empty-statement']

    def lines(self, node, prefix='', last=True, root=True):
        label = str(node)
        if root:
            yield label
            child_prefix = ''
        else:
            yield prefix + ('└── ' if last else '├── ') + label
            child_prefix = prefix + ('    ' if last else '│   ')

        if isinstance(node, Token):
            return
        children = self._children(node)
        for i, child in enumerate(children):
            yield from self.lines(child, child_prefix, i == len(children) - 1, root=False)

    def render(self, node):
        return '\n'.join(self.lines(node))


class Displayer:
    def __init__(self, tree, title='Parse Tree') -> None:
        self.tree = tree
        self.title = title

    def data(self, item):
        if isinstance(item, Token):
            return {'name': str(item)}
        return {
            'name': str(item),
            'children': [self.data(child) for child in item.children()],
        }

    def chart(self):
        return (
            Tree()
            .add(
                series_name="",  # name
                data=[self.data(self.tree)],  # data
                initial_tree_depth=-1,  # all expand
                orient="TB",  # top-to-bottom
                label_opts=opts.LabelOpts(
                    position="top",
                    vertical_align="middle",
                ),
            )
            .set_global_opts(title_opts=opts.TitleOpts(title=self.title))
        )

    def display(self, path='Tree.html'):
        self.chart().render(path)

        # modify js reference to local
        if settings.LOCAL_ECHARTS:
            with open(path, 'r', encoding='utf-8') as fin:
                content = fin.readlines()
            for i, line in enumerate(content):
                if '<script' in line and 'echarts.min.js' in line:
                    content[i] = '    <script type="text/javascript" src="echarts.min.js"></script>\n'
            with open(path, 'w', encoding='utf-8') as fout:
                fout.writelines(content)
        return path
